"""
Streamlit Frontend for Smart Finance

A single page:
1. Record an expense (text, voice, or a receipt / statement upload)
2. See totals and the spending breakdown
3. Browse and delete past records
4. Ask the AI for a financial advice report

The page only captures input and renders results. All logic lives in
the flows created by src.orchestrator.
"""

import asyncio

import streamlit as st

from src.audit import configure_logging
from src.config import get_settings, validate_all_settings
from src.orchestrator import AdviceFlow, ExpenseIngestionFlow, create_app_components
from src.queries import most_recent_first
from src.services.storage import StorageError
from src.validation import ExtractionFailedError, ExtractionInProgressError


TEXT_FAILED_MESSAGE = "无法识别账单信息，请确保包含金额和描述 (例如: '吃午饭20元')"
FILE_FAILED_MESSAGE = "无法识别文件内容，请上传清晰的账单截图或 PDF。"
STORAGE_FAILED_MESSAGE = "保存失败，账本未更改，请检查磁盘空间或权限后重试。"
TYPE_LABELS = {"Need": "刚需", "Want": "想要"}


st.set_page_config(
    page_title="智理财",
    page_icon="💰",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.effective_log_level)
    return create_app_components()


def render_sidebar():
    """Configuration status, as reported by the settings layer."""
    st.sidebar.title("💰 智理财")
    st.sidebar.markdown("### 配置状态")

    status = validate_all_settings()
    sections = [
        ("Gemini (AI)", "gemini"),
        ("本地存储", "storage"),
        ("应用设置", "app"),
    ]
    for name, key in sections:
        if status.get(key, False):
            st.sidebar.success(f"✅ {name}")
        else:
            error = status.get(f"{key}_error", "未配置")
            st.sidebar.error(f"❌ {name} - {error}")

    st.sidebar.markdown("---")
    st.sidebar.caption("在 `.env` 中配置 API Key，参见 `.env.example`。")


def main():
    """Main application entry point."""
    render_sidebar()

    try:
        ingestion_flow, advice_flow, _ = get_components()
    except Exception as e:
        st.error(f"初始化失败，请检查配置 (.env): {e}")
        st.stop()

    symbol = get_settings().app.currency_symbol
    summary = ingestion_flow.summary()

    st.title("💰 智理财")
    st.caption("基于 Gemini 的 AI 记账顾问")
    st.metric("总支出", f"{symbol} {summary.total:,.2f}")

    render_input(ingestion_flow)
    render_breakdown(ingestion_flow)
    render_history(ingestion_flow)
    render_advice(advice_flow)


def render_input(ingestion_flow: ExpenseIngestionFlow):
    """Text box, voice recorder and file picker."""
    st.subheader("记一笔")

    with st.form("text_entry", clear_on_submit=True):
        text = st.text_area("输入消费内容", placeholder="例如: 吃午饭20元")
        submitted = st.form_submit_button("记录", type="primary")

    if submitted and text.strip():
        with st.spinner("处理中..."):
            try:
                record = run_async(ingestion_flow.add_from_text(text))
                st.success(f"已记录: {record.description} {record.amount:.2f}")
            except ExtractionInProgressError as e:
                st.warning(str(e))
            except ExtractionFailedError:
                st.error(TEXT_FAILED_MESSAGE)
            except StorageError:
                st.error(STORAGE_FAILED_MESSAGE)

    audio = st.audio_input("语音记账")
    if audio is not None and st.button("识别语音"):
        with st.spinner("处理中..."):
            try:
                record = run_async(
                    ingestion_flow.add_from_voice(audio.getvalue(), audio.type or "audio/wav")
                )
                if record:
                    st.success(f"已记录: {record.description} {record.amount:.2f}")
            except ExtractionFailedError:
                st.error(TEXT_FAILED_MESSAGE)
            except StorageError:
                st.error(STORAGE_FAILED_MESSAGE)

    uploaded = st.file_uploader(
        "上传照片/PDF",
        type=["jpg", "jpeg", "png", "webp", "heic", "heif", "pdf"],
    )
    if uploaded is not None and st.button("导入文件"):
        with st.spinner("处理中..."):
            try:
                records = run_async(
                    ingestion_flow.add_from_file(
                        uploaded.getvalue(),
                        filename=uploaded.name,
                        mime_type=uploaded.type or "application/octet-stream",
                    )
                )
                st.success(f"成功识别并导入 {len(records)} 条记录！")
            except ExtractionFailedError:
                st.error(FILE_FAILED_MESSAGE)
            except StorageError:
                st.error(STORAGE_FAILED_MESSAGE)


def render_breakdown(ingestion_flow: ExpenseIngestionFlow):
    summary = ingestion_flow.summary()
    if not summary.record_count:
        st.info("暂无数据，快去记一笔吧！")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**支出类别分布**")
        st.bar_chart({k: float(v) for k, v in summary.by_category.items()})
    with col2:
        st.markdown("**刚需 vs 想要**")
        st.bar_chart({
            TYPE_LABELS[t.value]: float(v) for t, v in summary.by_type.items()
        })
    st.caption(f"想要类消费占比: {summary.want_share:.0%}")


def render_history(ingestion_flow: ExpenseIngestionFlow):
    st.subheader("最近记录")
    symbol = get_settings().app.currency_symbol
    records = most_recent_first(ingestion_flow.records())

    if not records:
        st.caption("暂无记录")
        return

    for record in records:
        col1, col2, col3 = st.columns([4, 2, 1])
        col1.markdown(
            f"**{record.description}**  \n{record.category} · {record.day}"
        )
        col2.markdown(
            f"-{symbol}{record.amount:.2f}  \n{TYPE_LABELS[record.type.value]}"
        )
        if col3.button("删除", key=f"delete-{record.id}"):
            try:
                ingestion_flow.delete(record.id)
            except StorageError:
                st.error(STORAGE_FAILED_MESSAGE)
            else:
                st.rerun()


def render_advice(advice_flow: AdviceFlow):
    st.subheader("AI 智囊团")

    if st.button("生成理财建议"):
        with st.spinner("分析中..."):
            st.session_state.advice = run_async(advice_flow.generate())

    if st.session_state.get("advice"):
        st.markdown(st.session_state.advice)
    else:
        st.caption("点击上方按钮，让 AI 分析您的消费习惯并提供建议。")


if __name__ == "__main__":
    main()
