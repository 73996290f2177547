from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from gardenplanner.core.deps import DB, get_database
from gardenplanner.db.session import Database
from gardenplanner.services.backup import export_backup, import_backup

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/export")
async def export(db: DB):
    backup = await export_backup(db)
    return JSONResponse(backup.model_dump(mode="json", by_alias=True))


@router.post("/import")
async def restore(
    payload: Annotated[dict[str, Any], Body()],
    database: Annotated[Database, Depends(get_database)],
):
    # Validated inside import_backup so a bad file maps to InvalidBackupError
    data = await import_backup(database, payload)
    return {"tasks": len(data.tasks), "crops": len(data.crops), "settings": len(data.settings)}
