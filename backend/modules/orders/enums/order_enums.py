from enum import Enum


class SplitType(str, Enum):
    PORTION = "portion"
    PERCENTAGE = "percentage"
