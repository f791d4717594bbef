from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class MemberCategoryRecord:
    name: str
    id: int
    category: str
    current_rating: Any = 0
    chart_data: List[Any] = field(default_factory=list)
    stats: Any = None
    member_since: Optional[str] = None
    last_login: Optional[str] = None
    last_update: str = ""

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "id": self.id,
            "category": self.category,
            "currentRating": self.current_rating,
            "chartData": self.chart_data,
            "stats": self.stats,
            "memberSince": self.member_since,
            "lastLogin": self.last_login,
            "lastUpdate": self.last_update,
        }
