"""
测试模式下使用的本地关键词匹配回复
"""
from typing import Any, Dict, Optional

TEST_RESPONSES = {
    "default": "I'm an AI assistant to help with your questions about this role. How can I help you today?",
    "requirements": (
        "This role requires experience with the following skills:\n\n"
        "- Strong communication skills\n"
        "- Problem-solving abilities\n"
        "- Teamwork and collaboration\n"
        "- Technical expertise in the relevant field\n\n"
        "Do you have experience with these requirements?"
    ),
    "salary": (
        "The salary for this position is competitive and based on experience. "
        "The typical range for this role in this location is between $80,000 and "
        "$120,000 per year, plus benefits."
    ),
    "application": (
        "To apply for this role, you can share your resume and we'll review your "
        "qualifications. Would you like to upload your resume now?"
    ),
    "company": (
        "This company is known for its innovative approach and great work culture. "
        "They offer competitive benefits and opportunities for professional growth."
    ),
    "interview": (
        "The interview process typically includes an initial screening, a technical "
        "assessment, and one or more interviews with the team and leadership."
    ),
}

# 按顺序匹配，命中第一个即返回
KEYWORDS = (
    (("requirements", "qualifications", "skills"), "requirements"),
    (("salary", "pay", "compensation"), "salary"),
    (("apply", "application", "submit"), "application"),
    (("company", "culture", "benefits"), "company"),
    (("interview", "process", "hiring"), "interview"),
)

TEST_MODE_NOTICE = (
    "We're using a local assistant due to connection issues. "
    "Your experience might be limited."
)


def test_mode_greeting(role_title: str) -> str:
    return f"Hello! I'm your AI assistant for the {role_title} role. Ask me anything about the position!"


def canned_reply(message: str, role: Optional[Dict[str, Any]] = None) -> str:
    """不调用模型，直接生成对用户消息的回复"""
    role = role or {}
    lowered = message.lower()
    for words, key in KEYWORDS:
        if any(word in lowered for word in words):
            return TEST_RESPONSES[key]

    tags = ", ".join(role.get("tags") or []) or "various technologies and tools"
    return (
        f"Thanks for your question about {message[:30]}... "
        f"As a {role.get('title', 'team member')}, you would be working with {tags}. "
        "Is there something specific about this role you'd like to know?"
    )
