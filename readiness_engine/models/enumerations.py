from enum import Enum
from typing import Optional


class Speaker(str, Enum):
    CLOSER = "closer"
    PROSPECT = "prospect"
    UNKNOWN = "unknown"


class ScoreBand(str, Enum):
    LOW = "Low"      # 1-3
    MID = "Mid"      # 4-6
    HIGH = "High"    # 7-10

    @classmethod
    def parse(cls, label: Optional[str]) -> Optional["ScoreBand"]:
        """Accept "High" as well as the labelled form "High (7–10)"; unknown labels give None."""
        if not label:
            return None
        head = label.strip().split(" ", 1)[0].split("(", 1)[0].lower()
        for band in cls:
            if band.value.lower() == head:
                return band
        return None


class ReadinessZone(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    NO_GO = "no-go"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class PillarCode(str, Enum):
    PERCEIVED_SPREAD = "P1"     # pain & desire gap
    URGENCY = "P2"
    DECISIVENESS = "P3"
    AVAILABLE_MONEY = "P4"
    RESPONSIBILITY = "P5"
    PRICE_SENSITIVITY = "P6"    # scored inverted
    TRUST = "P7"
