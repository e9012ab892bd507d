"""
Prompts and response schemas sent to Gemini.

Prompts are written in Chinese because the ledger, its categories and the
generated report are all in Chinese.
"""

from typing import Sequence

from src.models.expense import ExpenseRecord, ExpenseType


EXPENSE_TYPE_VALUES = [t.value for t in ExpenseType]

# Schema for a single expense described in free text
TEXT_EXPENSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "description": {"type": "STRING", "description": "消费内容的简短描述"},
        "amount": {"type": "NUMBER", "description": "金额"},
        "category": {"type": "STRING", "description": "消费类别"},
        "type": {
            "type": "STRING",
            "enum": EXPENSE_TYPE_VALUES,
            "description": "消费性质",
        },
    },
    "required": ["description", "amount", "category", "type"],
}

# Schema for every expense line found in a document
DOCUMENT_EXPENSES_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "description": {"type": "STRING"},
            "amount": {"type": "NUMBER"},
            "category": {"type": "STRING"},
            "type": {"type": "STRING", "enum": EXPENSE_TYPE_VALUES},
            "date": {
                "type": "STRING",
                "description": "YYYY-MM-DD, empty when the document shows no date",
                "nullable": True,
            },
        },
        "required": ["description", "amount", "category", "type"],
    },
}

CATEGORY_EXAMPLES = "餐饮, 交通, 娱乐, 购物, 住房, 医疗, 其他"

NO_DATA_MESSAGE = "暂无数据，无法分析。"
ADVICE_EMPTY_MESSAGE = "生成建议失败，请稍后重试。"
ADVICE_ERROR_MESSAGE = "生成建议时发生错误，请检查网络或稍后重试。"


def build_text_prompt(text: str, currency_code: str) -> str:
    return f"""分析以下文本，提取其中的一笔消费记录，并判断这笔消费是 "Need"（必须）还是 "Want"（想要）。

文本: "{text}"

要求：
1. 如果没有明确的货币单位，默认货币为 {currency_code}。
2. 类别 (category) 用简短的中文描述，例如：{CATEGORY_EXAMPLES}。
3. 金额 (amount) 必须是数字。"""


def build_document_prompt(current_year: int) -> str:
    return f"""分析这张图片或 PDF 文档，提取其中所有的消费/支出记录。

对于每一条记录：
1. 描述 (description)：简短说明这笔支出。
2. 金额 (amount)：纯数字。
3. 类别 (category)：简短的中文，例如：{CATEGORY_EXAMPLES}。
4. 性质 (type)："Need"（必须）或 "Want"（想要）。
5. 日期 (date)：格式为 YYYY-MM-DD。如果没有明确年份，按 {current_year} 年处理；如果找不到日期，留空。

只提取支出。忽略收入记录和余额信息。"""


def build_transcription_prompt(locale: str) -> str:
    return (
        f"请将这段录音逐字转写为文字（语言：{locale}）。"
        "只输出转写结果，不要添加任何解释。"
    )


def format_ledger(records: Sequence[ExpenseRecord], currency_symbol: str) -> str:
    """One line per record: date, description, category, amount, necessity."""
    return "\n".join(
        f"- {record.day}: {record.description} ({record.category}) - "
        f"{currency_symbol}{record.amount:.2f} [{record.type.value}]"
        for record in records
    )


def build_advice_prompt(ledger: str) -> str:
    return f"""作为一位专业的理财顾问，请根据以下用户的近期消费记录进行深入分析并给出建议。

消费记录:
{ledger}

请按以下结构生成一份中文 Markdown 报告:
1. **消费概览**: 总支出，以及 "Need" 与 "Want" 的比例。
2. **消费习惯分析**: 指出哪些是不必要的开支 (Want)，哪些习惯可以改进。
3. **省钱与投资建议**: 具体说明每月可以省下多少钱，以及这些钱用于长期投资（如指数基金、稳健理财产品）可能带来的收益。
4. **鼓励**: 鼓励用户养成更好的理财习惯。

语气要专业、诚恳，并且具有鼓励性。"""
