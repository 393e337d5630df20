"""Development-only gateway feedback routes.

Learn: when wiring up the API gateway it helps to see exactly what it
forwards. These routes log the incoming headers / resolved identity.
They are only mounted when SEALNOTE_ENVIRONMENT=development.
"""

import structlog
from fastapi import APIRouter, Depends, Request

from sealnote.auth.dependencies import require_identity
from sealnote.auth.guards import Identity

logger = structlog.get_logger()

router = APIRouter(prefix="/dev/gateway-feedback")


@router.get("/headers")
async def gateway_headers(request: Request):
    logger.info("dev.gateway_headers", headers=dict(request.headers))
    return {"message": "header list has been printed on the console"}


@router.get("/uuid")
async def gateway_uuid(identity: Identity = Depends(require_identity)):
    logger.info("dev.gateway_uuid", uuid=str(identity.uuid))
    return {"message": "uuid has been printed on the console", "uuid": str(identity.uuid)}
