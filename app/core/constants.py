from enum import Enum


DEFAULT_TYPE_GROUP = 1
DEFAULT_SPREADSHEET_SCORE = 1
CORRECT_OPTION_PREFIX = "Option "
OPTION_LABELS = ("A", "B", "C", "D")

# Legacy pagination stamped on the all-for-exam view
EXAM_VIEW_PAGE = 1
EXAM_VIEW_LIMIT = 10

EXAM_OR_PART_REQUIRED = "Exam or part is required!"
QUESTION_ID_REQUIRED = "Question ID is required!"
INVALID_OPTIONS_FORMAT = "Invalid options format"


class ElementTypeEnum(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"


class SpreadsheetColumn(str, Enum):
    PART = "Part"
    ORDER = "Order"
    TITLE_GROUP = "Title Group"
    DESCRIPTION_GROUP = "Description Group"
    ELEMENT_GROUP = "Element Group"
    QUESTION = "Question"
    DESCRIPTION = "Description"
    OPTION_A = "Option A"
    OPTION_B = "Option B"
    OPTION_C = "Option C"
    OPTION_D = "Option D"
    CORRECT_OPTION = "Correct option"
    ELEMENT = "Element"
    SUBJECT = "Subject"
    EXAM = "Exam"
