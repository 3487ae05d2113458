from collections.abc import Callable
from dataclasses import dataclass, field

from .literature import LiteratureRecord

ProgressCallback = Callable[[int, int, str, str], None]


@dataclass(frozen=True)
class ProgressUpdate:
	done: int
	total: int
	label: str
	message: str
	pool_size: int | None = None


@dataclass
class PipelineRunState:
	cancelled: bool = False
	accumulated_literature: list[LiteratureRecord] = field(default_factory=list)


@dataclass
class SearchRunResult:
	literature: list[LiteratureRecord]
	results_by_keyword: dict[str, list[LiteratureRecord]]
	cancelled: bool = False
	failed_keywords: list[str] = field(default_factory=list)
	progress: list[ProgressUpdate] = field(default_factory=list)

	@property
	def total(self) -> int:
		return len(self.literature)


@dataclass
class CompletionSummary:
	total: int = 0
	completed: int = 0
	failed: int = 0
	skipped: int = 0
	cancelled: bool = False


@dataclass
class FilterSummary:
	selected: list[LiteratureRecord] = field(default_factory=list)
	relevant_count: int = 0
	irrelevant_count: int = 0
	total: int = 0
	cancelled: bool = False
