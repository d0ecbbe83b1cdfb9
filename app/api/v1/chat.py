"""
面试对话 API 路由

每个职位创建一个会话，保存在内存会话存储中。
所有路由都返回会话快照，前端据此重绘聊天界面
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, Form, File, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import chat_service_dependency
from app.core.database import get_db
from app.core.response import success_response, DictResponse
from app.models.candidate import CandidateResponse
from app.services.chat_service import InterviewChatService
from app.services.storage import read_upload

router = APIRouter()


# ============ 请求 Schema ============

class HistoryItem(BaseModel):
    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str


class ChatRequest(BaseModel):
    """无状态对话请求"""
    role_id: str = Field(..., description="Role ID")
    message: Optional[str] = Field(None, description="User message")
    is_initial: bool = Field(False, description="Ask for the opening greeting")
    history: List[HistoryItem] = Field(default_factory=list, description="Earlier messages")


class MessageRequest(BaseModel):
    message: str = Field(..., description="User message")


class CompleteRequest(BaseModel):
    """随候选人一起保存的联系方式"""
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    resume_url: Optional[str] = Field(None, max_length=1000)


# ============ 无状态对话 ============

@router.post("", summary="Single persona reply", response_model=DictResponse)
async def chat_once(
    data: ChatRequest,
    db: AsyncSession = Depends(get_db),
    service: InterviewChatService = Depends(chat_service_dependency),
):
    """
    不保存会话的单次回复

    模型调用失败时返回人设的兜底消息并设置 is_error，不会返回 HTTP 错误
    """
    result = await service.reply_once(
        db,
        data.role_id,
        message=data.message,
        is_initial=data.is_initial,
        history=[h.model_dump() for h in data.history],
    )
    return success_response(data=result)


# ============ 会话 ============

@router.post("/start/{role_id}", summary="Start an interview session", response_model=DictResponse)
async def start_session(
    role_id: str,
    db: AsyncSession = Depends(get_db),
    service: InterviewChatService = Depends(chat_service_dependency),
):
    session = await service.start(db, role_id)
    return success_response(data=session.snapshot(), message="Chat session started")


@router.post("/message/{session_id}", summary="Send a message", response_model=DictResponse)
async def send_message(
    session_id: str,
    data: MessageRequest,
    service: InterviewChatService = Depends(chat_service_dependency),
):
    session, reply = await service.send(session_id, data.message)
    return success_response(data={"reply": reply, **session.snapshot()})


@router.get("/sessions/{session_id}", summary="Get session state", response_model=DictResponse)
async def get_session(
    session_id: str,
    service: InterviewChatService = Depends(chat_service_dependency),
):
    session = await service.get_session(session_id)
    return success_response(data=session.snapshot())


@router.post("/sessions/{session_id}/restart", summary="Restart the interview", response_model=DictResponse)
async def restart_session(
    session_id: str,
    service: InterviewChatService = Depends(chat_service_dependency),
):
    """
    以同一职位重新开始，旧会话 ID 随即失效
    """
    session = await service.restart(session_id)
    return success_response(data=session.snapshot(), message="Chat session restarted")


# ============ 上传文件 ============

@router.post("/sessions/{session_id}/assets", summary="Upload a file during the chat", response_model=DictResponse)
async def upload_asset(
    session_id: str,
    file: UploadFile = File(...),
    asset_type: str = Form("resume", description="resume or portfolio"),
    service: InterviewChatService = Depends(chat_service_dependency),
):
    content, size = await read_upload(file)
    session, asset, reply = await service.attach_asset(
        session_id, file.filename, file.content_type, content, asset_type, size=size
    )
    return success_response(
        data={
            "asset": asset.model_dump(mode="json"),
            "reply": reply,
            **session.snapshot(),
        },
        message="File uploaded"
    )


@router.delete("/sessions/{session_id}/assets/{asset_id}", summary="Remove an uploaded file", response_model=DictResponse)
async def remove_asset(
    session_id: str,
    asset_id: str,
    service: InterviewChatService = Depends(chat_service_dependency),
):
    session = await service.remove_asset(session_id, asset_id)
    return success_response(data=session.snapshot(), message="File removed")


# ============ 面试结果 ============

@router.post("/sessions/{session_id}/complete", summary="Evaluate and store the candidate", response_model=DictResponse)
async def complete_session(
    session_id: str,
    data: CompleteRequest,
    db: AsyncSession = Depends(get_db),
    service: InterviewChatService = Depends(chat_service_dependency),
):
    session, candidate = await service.complete(
        db,
        session_id,
        name=data.name,
        email=data.email,
        phone=data.phone,
        resume_url=data.resume_url,
    )
    return success_response(
        data={
            "candidate": CandidateResponse.model_validate(candidate).model_dump(mode="json"),
            "fit_score": session.fit_score,
            "summary_candidate": session.summary_candidate,
            "summary_recruiter": session.summary_recruiter,
        },
        message="Interview evaluated"
    )


@router.post("/sessions/{session_id}/email", summary="Draft a follow-up email", response_model=DictResponse)
async def draft_email(
    session_id: str,
    service: InterviewChatService = Depends(chat_service_dependency),
):
    result = await service.draft_followup_email(session_id)
    return success_response(data=result)
