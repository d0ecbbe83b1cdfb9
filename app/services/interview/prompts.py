"""
面试官人设的提示词构建

所有输入都是普通 dict（会话中的职位、公司和人设都是可 JSON 序列化的快照）
"""
import json
import re
from typing import Any, Dict, Optional, Sequence

from loguru import logger

from .modes import MODEL_DECIDES, normalize_mode


DEFAULT_TONE = "professional and friendly"
DEFAULT_VALUES = "innovation, teamwork, excellence"
DEFAULT_HR_EMAIL = "hr@company.com"
DEFAULT_END_MESSAGE = "Thank you! We'll be in touch."

# 自定义评分提示词未要求 JSON 格式时追加
SCORING_JSON_SUFFIX = """

Return your response in JSON format:
{
  "fit_score": 0.0 to 1.0,
  "summary_candidate": "text",
  "summary_recruiter": "text"
}
"""


def format_answers(answers: Sequence[dict]) -> str:
    """格式化为 Q1: ...\\nA1: ... 的问答块，块之间空一行"""
    return "\n\n".join(
        f"Q{i}: {item['q']}\nA{i}: {item['a']}"
        for i, item in enumerate(answers, start=1)
    )


def generate_system_prompt(
    persona: Dict[str, Any],
    role: Dict[str, Any],
    company: Dict[str, Any],
    mode: Optional[str] = None,
) -> str:
    """
    生成人设的系统提示词

    人设自带 system_prompt 时直接使用，否则根据人设、职位和公司字段构建
    """
    if persona.get("system_prompt"):
        return persona["system_prompt"]

    mode = normalize_mode(mode or persona.get("conversation_mode") or role.get("conversation_mode"))
    tone = persona.get("tone") or company.get("tone") or DEFAULT_TONE
    values = ", ".join(company.get("cultural_keywords") or []) or DEFAULT_VALUES
    assets = ", ".join(role.get("must_have_assets") or []) or "resume"
    fallback = persona.get("fallback_message") or (
        f"Please reach our HR at {company.get('hr_contact_email') or DEFAULT_HR_EMAIL}"
    )
    end_message = persona.get("end_message") or DEFAULT_END_MESSAGE

    if mode == "structured" and persona.get("question_sequence"):
        approach = "You will ask a specific sequence of questions to evaluate the candidate."
    else:
        approach = "Ask questions to best evaluate the candidate for this role."

    lines = [
        f"You are {persona.get('persona_name') or 'AI Recruiter'}, representing the "
        f"{role.get('title', 'open')} role at {company.get('name') or 'our company'}.",
        "",
        f"Speak in a tone that is {tone}.",
        f"Conversation mode: {mode}.",
        f"Company values: {values}",
        "",
        approach,
        "",
        f"Prompt the user for {assets} if required.",
        "",
        f'Fallback message: "{fallback}"',
        f'End message: "{end_message}"',
    ]
    return "\n".join(lines)


def turn_instruction(next_question: Optional[str]) -> Optional[str]:
    """下一轮助手回复的附加系统指令"""
    if next_question is None:
        return None
    if next_question == MODEL_DECIDES:
        return (
            "Briefly respond to the candidate, then ask the next most useful "
            "question for evaluating them for this role. Ask one question at a time."
        )
    return (
        "Briefly respond to the candidate, then ask exactly this next question: "
        f"\"{next_question}\""
    )


def generate_scoring_prompt(
    answers: Sequence[dict],
    role_title: str,
    scoring_prompt: Optional[str] = None,
) -> str:
    """生成评分提示词，要求返回 fit_score / summary_candidate / summary_recruiter JSON"""
    formatted = format_answers(answers)
    if scoring_prompt:
        prompt = scoring_prompt.replace("{ANSWERS}", formatted)
        if "{ANSWERS}" not in scoring_prompt:
            prompt += f"\n\nQ&A:\n{formatted}"
        if "fit_score" not in scoring_prompt:
            prompt += SCORING_JSON_SUFFIX
        return prompt

    return f"""
Evaluate the candidate for the {role_title} role.

Q&A:
{formatted}

Please provide:
1. fit_score: A number between 0.0 and 1.0 representing how well the candidate fits the role
2. summary_candidate: A friendly, encouraging summary for the candidate
3. summary_recruiter: A professional assessment for the recruiter highlighting strengths and areas of concern

Return your response in JSON format:
{{
  "fit_score": 0.0 to 1.0,
  "summary_candidate": "text",
  "summary_recruiter": "text"
}}
"""


def generate_email_prompt(
    answers: Sequence[dict],
    role_title: str,
    company_name: str,
    candidate_name: str,
    fit_score: float,
    email_prompt: Optional[str] = None,
) -> str:
    """生成跟进邮件提示词"""
    formatted = format_answers(answers)
    if email_prompt:
        prompt = (
            email_prompt
            .replace("{ANSWERS}", formatted)
            .replace("{ROLE}", role_title)
            .replace("{COMPANY}", company_name)
            .replace("{CANDIDATE}", candidate_name)
            .replace("{SCORE}", str(fit_score))
        )
        if "{ANSWERS}" not in email_prompt:
            prompt += f"\n\nCandidate: {candidate_name}\n\nQ&A from their interview:\n{formatted}"
        return prompt

    return f"""
Draft a personalized follow-up email to {candidate_name} regarding their application for the {role_title} position at {company_name}.

Based on their interview, they received a fit score of {fit_score} out of 1.0.

Q&A from their interview:
{formatted}

Include:
1. Appreciation for their time
2. Summary of their relevant experience and strengths
3. Next steps in the hiring process
4. Contact information for any questions

The tone should be professional but warm, representative of the company's culture.

Return only the email text, ready to send.
"""


_FENCED = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)
_BRACED = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_reply(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    从模型回复中提取 JSON 对象

    支持代码块包裹以及 {...} 前后夹杂文字的情况，无法解析为 dict 时返回 None
    """
    if not text:
        return None

    candidates = []
    fenced = _FENCED.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    braced = _BRACED.search(text)
    if braced:
        candidates.append(braced.group(0))
    candidates.append(text)

    for chunk in candidates:
        try:
            value = json.loads(chunk.strip())
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value

    logger.warning("Could not parse JSON from model reply: {}", text[:200])
    return None
