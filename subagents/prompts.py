from typing import Optional

ROLE_DIRECTIVE = (
    "You are an expert subagent. Follow the role below precisely. "
    "Then complete the task."
)

OUTPUT_REQUIREMENTS = (
    "Output Requirements:\n"
    "- Be concise and actionable.\n"
    "- If code is needed, include complete runnable snippets.\n"
    "- Use bullet points where helpful.\n"
    "- Cite sources if you used web results."
)

GATEWAY_SYSTEM_PROMPT = "You are a concise, expert assistant."


def build_prompt(role_text: str, task: str, context: Optional[str] = None) -> str:
    sections = [
        ROLE_DIRECTIVE,
        f"Role Spec (from library):\n\n{role_text}",
        f"Task:\n{task}",
    ]
    if context:
        sections.append(f"Additional Context:\n{context}")
    sections.append(OUTPUT_REQUIREMENTS)
    return "\n\n".join(sections)


def build_fallback_answer(agent: str, task: str) -> str:
    return (
        f"I'm a {agent} subagent. Here's my response to your task: {task}. \n\n"
        "Note: The subagent library is not currently available, but I can still help. "
        "Provide more specifics if needed."
    )
