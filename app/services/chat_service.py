"""
面试对话服务

连接 InterviewSession 与模型 API、数据库、文件存储和会话存储。
模型调用失败不会抛给调用方：先重试，重试耗尽后会话永久切换到本地预设回复
"""
import asyncio
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    UpstreamException,
)
from app.crud import role_crud, candidate_crud
from app.models.candidate import Candidate, CandidateCreate
from app.models.company import CompanyResponse
from app.models.persona import PersonaResponse
from app.models.role import Role, RoleResponse
from app.services.llm_client import LLMClient, LLMUnavailableError
from app.services.storage import (
    PORTFOLIO_TYPES,
    RESUME_TYPES,
    StorageError,
    build_object_path,
    validate_upload,
)
from app.services.interview import (
    AssetStatus,
    InterviewSession,
    MemorySessionStore,
    SessionState,
    SessionStateError,
    UploadedAsset,
    canned_reply,
    generate_email_prompt,
    generate_scoring_prompt,
    generate_system_prompt,
    parse_json_reply,
    test_mode_greeting,
    turn_instruction,
)
from app.services.interview.modes import MODEL_DECIDES
from app.services.interview.prompts import DEFAULT_END_MESSAGE


DEFAULT_PERSONA: Dict[str, Any] = {
    "persona_name": "AI Recruiter",
    "bio": "A professional AI recruiter",
    "tone": "professional and helpful",
    "conversation_mode": "conversational",
    "system_prompt": None,
    "question_sequence": [],
    "scoring_prompt": None,
    "email_prompt": None,
    "fallback_message": (
        "I'm here to help you learn more about this role and assist with "
        "your application process."
    ),
    "end_message": None,
    "avatar_url": None,
}

CONNECTION_TROUBLE = (
    "I apologize, but I'm having trouble connecting to my knowledge base "
    "right now. Please try again later."
)

SCORING_SYSTEM_PROMPT = (
    "You are an experienced recruiter evaluating interview answers. "
    "Reply with a single JSON object only."
)
EMAIL_SYSTEM_PROMPT = "You are a recruiter writing a follow-up email to a candidate."

NEUTRAL_EVALUATION = {
    "fit_score": 0.5,
    "summary_candidate": (
        "Thank you for completing the interview! Our team will review your "
        "answers and get back to you soon."
    ),
    "summary_recruiter": (
        "Automatic evaluation was unavailable for this interview. "
        "Please review the answers manually."
    ),
}


def role_context(role: Role) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """把职位、公司和人设转换为普通 dict，没有人设时使用默认人设"""
    role_data = RoleResponse.model_validate(role).model_dump(mode="json")
    company_data = (
        CompanyResponse.model_validate(role.company).model_dump(mode="json")
        if role.company else {}
    )
    if role.persona is not None:
        persona_data = PersonaResponse.model_validate(role.persona).model_dump(mode="json")
    else:
        logger.warning("No persona for role {}, using default", role.id)
        persona_data = dict(DEFAULT_PERSONA)
    return role_data, company_data, persona_data


def _normalize_score(value: Any) -> Optional[float]:
    """分数通常为 0-1，偶尔会返回 0-100"""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if score > 1.0:
        score = score / 100.0
    return max(0.0, min(1.0, round(score, 3)))


class InterviewChatService:
    """/chat 路由背后的对话操作"""

    def __init__(self, llm: LLMClient, store: MemorySessionStore, storage=None):
        self.llm = llm
        self.store = store
        self.storage = storage
        self.max_retries = settings.chat_max_retries
        self.min_questions = settings.chat_min_questions

    # ==================== 辅助方法 ====================

    async def get_session(self, session_id: str) -> InterviewSession:
        session = await self.store.get(session_id)
        if session is None:
            raise NotFoundException("Chat session not found or expired")
        return session

    async def _load_role(self, db: AsyncSession, role_id: str) -> Role:
        role = await role_crud.get(db, role_id)
        if not role:
            raise NotFoundException("Role not found")
        return role

    def _build_messages(
        self, session: InterviewSession, instruction: Optional[str]
    ) -> List[Dict[str, str]]:
        system_prompt = generate_system_prompt(
            session.persona, session.role, session.company, session.mode
        )
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(session.history())
        if instruction:
            messages.append({"role": "system", "content": instruction})
        return messages

    async def _reply_with_retries(
        self, session: InterviewSession, messages: List[Dict[str, str]]
    ) -> Optional[str]:
        """
        请求模型回复，失败时按固定间隔重试

        首次请求和所有重试都失败时返回 None
        """
        if not self.llm.is_configured():
            session.register_failure()
            logger.warning("LLM not configured, session {} uses local replies", session.session_id)
            return None

        while True:
            try:
                reply = await self.llm.complete_chat(messages)
            except LLMUnavailableError as exc:
                session.register_failure()
                logger.warning(
                    "Model call failed for session {} (attempt {}): {}",
                    session.session_id, session.retry_count, exc,
                )
                if session.retries_exhausted(self.max_retries):
                    return None
                await asyncio.sleep(settings.chat_retry_delay)
                continue
            session.register_success()
            return reply.content

    async def _open(self, session: InterviewSession) -> None:
        """先发加载提示，再发人设开场白（或本地开场白）"""
        title = session.role.get("title", "")
        session.add_assistant_message(
            f"Hi! I'm loading information about the {title} role...", kind="status"
        )

        first = session.next_question()
        if first is None or first == MODEL_DECIDES:
            instruction = (
                "Start the conversation: greet the candidate, introduce yourself "
                "in one or two sentences and ask your first question."
            )
        else:
            instruction = (
                "Start the conversation: greet the candidate, introduce yourself "
                f"in one or two sentences, then ask: \"{first}\""
            )

        reply = await self._reply_with_retries(session, self._build_messages(session, instruction))
        if reply is None:
            session.enable_test_mode("greeting failed")
            reply = test_mode_greeting(title)
        session.finish_turn(reply)

    # ==================== 会话生命周期 ====================

    async def start(self, db: AsyncSession, role_id: str) -> InterviewSession:
        """为职位创建会话并向候选人打招呼"""
        role = await self._load_role(db, role_id)
        role_data, company_data, persona_data = role_context(role)

        session = InterviewSession()
        session.load(role_data, company_data, persona_data, min_questions=self.min_questions)
        await self._open(session)
        await self.store.set(session)

        logger.info(
            "Chat session {} started for role {} (mode={}, test_mode={})",
            session.session_id, role_id, session.mode, session.test_mode,
        )
        return session

    async def send(self, session_id: str, message: str) -> Tuple[InterviewSession, str]:
        """处理一轮用户消息，返回会话和助手回复"""
        session = await self.get_session(session_id)
        text = (message or "").strip()
        if not text:
            raise BadRequestException("Message cannot be empty")
        if session.state == SessionState.COMPLETE:
            raise ConflictException("This interview is already complete")

        try:
            session.begin_turn(text)
        except SessionStateError as exc:
            raise ConflictException(str(exc))

        try:
            if session.test_mode:
                reply = canned_reply(text, session.role)
            elif session.is_complete():
                reply = session.persona.get("end_message") or DEFAULT_END_MESSAGE
            else:
                instruction = turn_instruction(session.next_question())
                reply = await self._reply_with_retries(
                    session, self._build_messages(session, instruction)
                )
                if reply is None:
                    session.enable_test_mode("model unavailable")
                    reply = canned_reply(text, session.role)
        except Exception:
            session.abort_turn()
            await self.store.set(session)
            raise

        session.finish_turn(reply)
        await self.store.set(session)
        return session, reply

    async def restart(self, session_id: str) -> InterviewSession:
        """为同一职位重新开始会话，旧 ID 随即失效"""
        session = await self.get_session(session_id)
        await self.store.delete(session_id)
        session.reset()
        await self._open(session)
        await self.store.set(session)
        logger.info("Chat session {} restarted as {}", session_id, session.session_id)
        return session

    # ==================== 上传文件 ====================

    async def attach_asset(
        self,
        session_id: str,
        filename: str,
        content_type: Optional[str],
        content: bytes,
        asset_type: str = "resume",
        size: Optional[int] = None,
    ) -> Tuple[InterviewSession, UploadedAsset, Optional[str]]:
        """
        聊天过程中上传文件

        会话等待用户输入时，上传成功的文件会以一条用户消息告知人设。
        `content` 只读取到上限时，`size` 为上传声明的大小
        """
        session = await self.get_session(session_id)
        if size is None:
            size = len(content)
        asset = session.add_asset(filename or "file", size, asset_type)

        allowed = PORTFOLIO_TYPES if asset_type == "portfolio" else RESUME_TYPES
        try:
            validate_upload(filename, content_type, size, allowed)
        except BadRequestException as exc:
            session.update_asset(asset.id, status=AssetStatus.ERROR, progress=100, error=exc.message)
            await self.store.set(session)
            raise BadRequestException(exc.message, data={"asset": asset.model_dump(mode="json")})

        path = build_object_path(filename, prefix=f"{session.role_id}/{session.session_id}")
        try:
            url = await self.storage.upload(
                settings.storage_asset_bucket, path, content, content_type
            )
        except StorageError as exc:
            logger.error("Asset upload failed for session {}: {}", session_id, exc)
            session.update_asset(
                asset.id, status=AssetStatus.ERROR, progress=100, error="Failed to upload file"
            )
            await self.store.set(session)
            raise UpstreamException("Failed to upload file. Please try again.")

        session.update_asset(asset.id, status=AssetStatus.SUCCESS, progress=100, url=url)
        await self.store.set(session)

        reply = None
        if session.state == SessionState.AWAITING_USER_INPUT:
            kind = "resume" if "resume" in filename.lower() or "pdf" in (content_type or "") else "file"
            session, reply = await self.send(session_id, f"I've uploaded my {kind}: {filename}")
        return session, session.get_asset(asset.id), reply

    async def remove_asset(self, session_id: str, asset_id: str) -> InterviewSession:
        session = await self.get_session(session_id)
        if not session.remove_asset(asset_id):
            raise NotFoundException("Asset not found")
        await self.store.set(session)
        return session

    # ==================== 评估 ====================

    async def _evaluate(self, session: InterviewSession) -> Dict[str, Any]:
        if session.test_mode or not self.llm.is_configured():
            return dict(NEUTRAL_EVALUATION)

        prompt = generate_scoring_prompt(
            session.answers,
            session.role.get("title", ""),
            session.persona.get("scoring_prompt"),
        )
        try:
            reply = await self.llm.complete(SCORING_SYSTEM_PROMPT, prompt)
        except LLMUnavailableError as exc:
            logger.warning("Scoring failed for session {}: {}", session.session_id, exc)
            return dict(NEUTRAL_EVALUATION)

        parsed = parse_json_reply(reply.content)
        score = _normalize_score(parsed.get("fit_score")) if parsed else None
        if score is None:
            return dict(NEUTRAL_EVALUATION)
        return {
            "fit_score": score,
            "summary_candidate": parsed.get("summary_candidate") or NEUTRAL_EVALUATION["summary_candidate"],
            "summary_recruiter": parsed.get("summary_recruiter") or NEUTRAL_EVALUATION["summary_recruiter"],
        }

    async def complete(
        self,
        db: AsyncSession,
        session_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        resume_url: Optional[str] = None,
    ) -> Tuple[InterviewSession, Candidate]:
        """对回答评分并保存候选人"""
        session = await self.get_session(session_id)
        if not session.answers:
            raise BadRequestException("There are no answers to evaluate yet")
        if session.state == SessionState.AWAITING_MODEL_REPLY:
            raise ConflictException("A reply is still pending")

        session.set_candidate_info(name, email)
        evaluation = await self._evaluate(session)
        session.set_evaluation(**evaluation)

        resumes = session.asset_urls("resume")
        candidate = await candidate_crud.create(
            db,
            obj_in=CandidateCreate(
                role_id=session.role_id,
                name=name,
                email=email,
                phone=phone,
                answers=session.answers,
                resume_url=resume_url or (resumes[-1] if resumes else None),
                portfolio_urls=session.asset_urls("portfolio"),
                **evaluation,
            ),
        )
        session.candidate_id = candidate.id
        await self.store.set(session)

        logger.info(
            "Candidate {} stored for role {} (fit_score={})",
            candidate.id, session.role_id, evaluation["fit_score"],
        )
        return session, candidate

    async def draft_followup_email(self, session_id: str) -> Dict[str, Any]:
        """生成跟进邮件，模型不可用时返回人设的结束语"""
        session = await self.get_session(session_id)
        if session.fit_score is None:
            raise BadRequestException("Complete the interview evaluation first")

        fallback = session.persona.get("end_message") or DEFAULT_END_MESSAGE
        if session.test_mode or not self.llm.is_configured():
            return {"email": fallback, "generated": False}

        prompt = generate_email_prompt(
            session.answers,
            session.role.get("title", ""),
            session.company.get("name", ""),
            session.candidate_name or "Candidate",
            session.fit_score,
            session.persona.get("email_prompt"),
        )
        try:
            reply = await self.llm.complete(EMAIL_SYSTEM_PROMPT, prompt)
        except LLMUnavailableError as exc:
            logger.warning("Email draft failed for session {}: {}", session_id, exc)
            return {"email": fallback, "generated": False}
        return {"email": reply.content, "generated": True}

    # ==================== 无状态对话 ====================

    async def reply_once(
        self,
        db: AsyncSession,
        role_id: str,
        message: Optional[str] = None,
        is_initial: bool = False,
        history: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """不保存会话的单次回复"""
        if not is_initial and not (message or "").strip():
            raise BadRequestException("Message is required")

        role = await self._load_role(db, role_id)
        role_data, company_data, persona_data = role_context(role)

        messages = [{
            "role": "system",
            "content": generate_system_prompt(persona_data, role_data, company_data),
        }]
        messages.extend(history or [])
        if not is_initial and message:
            messages.append({"role": "user", "content": message})
        elif is_initial:
            messages.append({
                "role": "system",
                "content": "Greet the candidate and introduce yourself in one or two sentences.",
            })

        try:
            reply = await self.llm.complete_chat(messages)
        except LLMUnavailableError as exc:
            logger.error("Stateless chat failed for role {}: {}", role_id, exc)
            return {
                "message": persona_data.get("fallback_message") or CONNECTION_TROUBLE,
                "is_error": True,
                "used_fallback_model": True,
            }
        return {
            "message": reply.content,
            "is_error": False,
            "used_fallback_model": reply.used_fallback,
        }
