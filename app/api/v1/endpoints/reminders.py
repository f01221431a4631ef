from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.api.deps import get_reminder_context, verify_cron_secret
from app.services.reminder_service import ReminderContext, run_reminder_sweep

router = APIRouter()

@router.get("/send-reminders", dependencies=[Depends(verify_cron_secret)])
async def send_reminders(ctx: ReminderContext = Depends(get_reminder_context)):
    """
    Run one reminder sweep. Meant to be hit by an external cron.
    Per-task delivery problems are reported in `results`; only a failure to
    load tasks turns into a 500.
    """
    report = await run_reminder_sweep(ctx)
    if not report.success:
        return JSONResponse(status_code=500, content={"success": False, "error": report.error})

    return report.model_dump(mode="json", exclude={"error"}, exclude_none=True)
