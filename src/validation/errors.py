"""
Extraction error hierarchy.

Every failure on the way from user input to expense fields is an
ExtractionFailedError. Callers that only care whether extraction worked
catch the base class; the subclasses say what went wrong.
"""


class ExtractionFailedError(Exception):
    """Base exception: the input could not be turned into expenses."""

    default_message = "账单识别失败，请重试。"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class ExtractionParseError(ExtractionFailedError):
    """The service answered, but not with a usable expense."""

    default_message = "无法解析该文本，请重试。"


class ExtractionEmptyError(ExtractionFailedError):
    """A document yielded no expense items."""

    default_message = "未能在文件中识别到有效的支出记录。"


class ExtractionServiceError(ExtractionFailedError):
    """The AI service could not be reached or returned an error."""

    default_message = "调用 AI 服务失败，请检查网络或稍后重试。"


class UnsupportedDocumentError(ExtractionFailedError):
    """The uploaded document is of a type or size we do not read."""

    default_message = "不支持的文件类型，请上传图片或 PDF。"


class ExtractionInProgressError(ExtractionFailedError):
    """Another extraction is still pending for this session."""

    default_message = "正在处理上一条记录，请稍候。"
