from dataclasses import dataclass


@dataclass
class Cell:
    """One grid slot. value is only meaningful when has_value is set by recalculation."""
    text: str = ""
    value: float = 0.0
    has_value: bool = False

    @property
    def blank(self) -> bool:
        return self.text == ""

    def reset(self) -> None:
        self.text = ""
        self.value = 0.0
        self.has_value = False
