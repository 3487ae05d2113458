import re

_NON_WORD = re.compile(r'[^\w\s]')


def normalize_title(title: str | None) -> str:
	if not title:
		return ''
	return _NON_WORD.sub('', title.lower().strip())


def _significant_words(normalized: str) -> list[str]:
	return [word for word in normalized.split() if len(word) > 2]


def title_similarity(title_a: str | None, title_b: str | None) -> float:
	"""Score how likely two titles name the same paper, from 0 to 100.

	- 100 when the normalized titles are equal
	- 80 * len(shorter) / len(longer) when one contains the other
	- otherwise 60 * shared words (longer than 2 chars) / max word count, or 0
	"""
	a = normalize_title(title_a)
	b = normalize_title(title_b)
	if not a or not b:
		return 0.0

	if a == b:
		return 100.0

	if a in b or b in a:
		shorter, longer = sorted((a, b), key=len)
		return len(shorter) / len(longer) * 80

	words_a = _significant_words(a)
	words_b = _significant_words(b)
	common = [word for word in words_a if word in words_b]
	if not common:
		return 0.0

	return len(common) / max(len(words_a), len(words_b)) * 60
