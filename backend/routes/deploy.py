# backend/routes/deploy.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from backend.core.auth import get_user_id, require_user_id
from backend.core.dependencies import get_deployer
from backend.services.deploy_service import DeploymentService, GitHubNotConnectedError
from utils import ErrorHandler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/deploy-chatbot/{chatbot_id}")
def deploy_chatbot(
    chatbot_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    deployer: DeploymentService = Depends(get_deployer),
):
    user_id = require_user_id(user_id)
    logger.info(f"Received request to deploy chatbot: {chatbot_id}")
    try:
        return deployer.deploy(chatbot_id, user_id)
    except GitHubNotConnectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise ErrorHandler.handle_api_error("deploy chatbot", e, chatbot_id)
