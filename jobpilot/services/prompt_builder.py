"""Prompt building utilities for LLM interactions.

Every builder returns a ``(system_prompt, user_prompt)`` pair. Prompts are in
Russian because the candidate applies on HH.ru.
"""

from jobpilot.schemas.candidate import Contacts
from jobpilot.schemas.hh import PostingDetail

EVALUATION_SYSTEM = """Ты карьерный консультант. Оцени, насколько вакансия подходит кандидату с данным резюме.

Ответь ТОЛЬКО JSON без markdown, строго такого вида:
{
  "score": 75,
  "recommendation": "apply",
  "priority": 4,
  "match_reasons": ["причина 1", "причина 2"],
  "concerns": ["риск 1"],
  "salary_assessment": "краткая оценка зарплаты"
}

score: целое 0-100.
recommendation: "apply", "maybe" или "skip".
priority: целое 1-5, 5 означает откликнуться в первую очередь.
match_reasons: 2-4 конкретные причины совпадения.
concerns: 0-3 возможные проблемы.
salary_assessment: насколько зарплата адекватна рынку."""

COVER_LETTER_SYSTEM = """Ты кандидат, который сам пишет сопроводительное письмо к отклику на hh.ru.

Правила:
- Пиши по-русски, живо и по делу, короткими предложениями
- Не начинай со "Здравствуйте" и не используй канцелярские штампы
- Упомяни конкретные детали вакансии и релевантный опыт из резюме
- 2-3 абзаца, не больше 800 символов
- Не добавляй подпись с именем и не используй плейсхолдеры вроде [Имя]
- Выведи только текст письма"""

CLASSIFY_SYSTEM = """Ты эксперт по HR-коммуникациям. Проанализируй новое сообщение работодателя в чате отклика.

Ответь ТОЛЬКО JSON без markdown:
{
  "is_bot": false,
  "is_human_recruiter": true,
  "requires_response": true,
  "sentiment": "positive",
  "intent": "invitation",
  "should_hand_off": true
}

is_bot: автоматическое сообщение (шаблон, опрос, тест, рассылка).
is_human_recruiter: пишет живой рекрутер.
requires_response: нужно ли отвечать.
sentiment: "positive", "neutral" или "negative".
intent: "question", "invitation", "rejection", "info" или "test".
should_hand_off: стоит ли предложить продолжить общение в Telegram."""

REPLY_SYSTEM = """Ты кандидат на работу и отвечаешь рекрутеру в чате hh.ru.

Правила:
- Дружелюбный естественный тон, 2-4 коротких предложения
- Отвечай именно на заданный вопрос, опираясь на резюме
- На приглашение отвечай согласием и уточняй детали
- Выведи только текст ответа"""

INTRO_SYSTEM = """Ты кандидат, который только что откликнулся на вакансию и пишет первое сообщение в чат.

Напиши 1-2 предложения: живой интерес к позиции и готовность к диалогу.
Не повторяй сопроводительное письмо и не начинай со "Здравствуйте".
В конце добавь переданные контакты. Выведи только текст сообщения."""

HANDOFF_SYSTEM = """Ты кандидат, который общается с живым рекрутером в чате hh.ru.

Напиши одно короткое дружелюбное предложение: предложи продолжить общение в Telegram
для быстрой связи и укажи переданный контакт. Выведи только это предложение."""

SEARCH_TAGS_SYSTEM = """Ты эксперт по поиску работы на hh.ru. По резюме подбери теги и поисковые запросы.

Ответь ТОЛЬКО JSON без markdown:
{
  "primary_tags": ["Python Developer", "Backend разработчик"],
  "skill_tags": ["Python", "FastAPI", "PostgreSQL"],
  "industry_tags": ["IT", "Fintech"],
  "suggested_queries": ["Python разработчик", "Backend developer remote"]
}

primary_tags: 2-4 названия должностей на русском и английском.
skill_tags: 4-8 ключевых навыков.
industry_tags: 2-4 отрасли.
suggested_queries: 3-6 готовых запросов для поиска на hh.ru."""


def _posting_block(posting: PostingDetail) -> str:
    salary = posting.salary.describe() if posting.salary else "не указана"
    skills = ", ".join(posting.key_skills) if posting.key_skills else "не указаны"
    return (
        f"Вакансия: {posting.name}\n"
        f"Компания: {posting.employer_name}\n"
        f"Зарплата: {salary}\n"
        f"Ключевые навыки: {skills}\n\n"
        f"Описание вакансии:\n{posting.description}"
    )


def _contacts_block(contacts: Contacts) -> str:
    return f"Telegram: {contacts.telegram}\nEmail: {contacts.email}"


def build_evaluation_prompt(posting: PostingDetail, profile: str) -> tuple[str, str]:
    user = (
        f"{_posting_block(posting)}\n\n"
        f"Резюме кандидата:\n{profile}\n\n"
        "Оцени и верни JSON."
    )
    return EVALUATION_SYSTEM, user


def build_cover_letter_prompt(
    posting: PostingDetail, profile: str, contacts: Contacts
) -> tuple[str, str]:
    user = (
        f"{_posting_block(posting)}\n\n"
        f"Моё резюме:\n{profile}\n\n"
        "Напиши сопроводительное письмо. В самом конце после строки '---' добавь:\n"
        f"{_contacts_block(contacts)}"
    )
    return COVER_LETTER_SYSTEM, user


def build_classify_prompt(text: str, history: str) -> tuple[str, str]:
    user = (
        f"История переписки:\n{history or '(пусто)'}\n\n"
        f"Новое сообщение:\n{text}\n\n"
        "Проанализируй и верни JSON."
    )
    return CLASSIFY_SYSTEM, user


def build_reply_prompt(text: str, profile: str, posting_title: str) -> tuple[str, str]:
    user = (
        f"Вакансия: {posting_title}\n\n"
        f"Моё резюме:\n{profile}\n\n"
        f"Сообщение рекрутера:\n{text}\n\n"
        "Напиши ответ."
    )
    return REPLY_SYSTEM, user


def build_intro_prompt(cover_letter: str, contacts: Contacts) -> tuple[str, str]:
    user = (
        f"Сопроводительное письмо (только для контекста):\n{cover_letter}\n\n"
        f"Контакты для связи:\n{_contacts_block(contacts)}"
    )
    return INTRO_SYSTEM, user


def build_handoff_prompt(context: str, contacts: Contacts) -> tuple[str, str]:
    user = (
        f"Последнее сообщение рекрутера:\n{context}\n\n"
        f"Telegram: {contacts.telegram}"
    )
    return HANDOFF_SYSTEM, user


def build_search_tags_prompt(profile: str) -> tuple[str, str]:
    user = f"Резюме кандидата:\n{profile}\n\nПодбери теги и запросы."
    return SEARCH_TAGS_SYSTEM, user
