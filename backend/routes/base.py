# backend/routes/base.py
from fastapi import APIRouter, Depends
from backend.core.dependencies import get_generator
from backend.services.generator import ChatbotGenerator

router = APIRouter()


@router.get("/test")
async def test():
    return {"message": "Server is working!"}


@router.get("/templates")
async def get_templates(generator: ChatbotGenerator = Depends(get_generator)):
    return {"templates": generator.list_templates()}
