import json
import re
from typing import Any

from litreview.errors import GenerationFormatError

_FENCED_JSON = re.compile(r'```json\s*([\s\S]*?)\s*```', re.IGNORECASE)
_FENCED_ANY = re.compile(r'```[a-zA-Z]*\s*([\s\S]*?)\s*```')


def first_object_span(text: str) -> str | None:
	"""Return the first balanced top-level ``{...}`` span, ignoring braces inside strings."""
	start = text.find('{')
	while start != -1:
		depth = 0
		in_string = False
		escaped = False
		for pos in range(start, len(text)):
			char = text[pos]
			if in_string:
				if escaped:
					escaped = False
				elif char == '\\':
					escaped = True
				elif char == '"':
					in_string = False
				continue
			if char == '"':
				in_string = True
			elif char == '{':
				depth += 1
			elif char == '}':
				depth -= 1
				if depth == 0:
					return text[start : pos + 1]
		start = text.find('{', start + 1)
	return None


def extract_json_object(content: str) -> dict[str, Any]:
	"""Pull a JSON object out of raw generator text.

	A fenced code block is tried first, then the first top-level ``{...}`` span.
	Raises GenerationFormatError when neither parses into a JSON object.
	"""
	if not content or not content.strip():
		raise GenerationFormatError('Empty response from text generator', raw_response=content)

	candidates: list[str] = []
	fenced = _FENCED_JSON.search(content) or _FENCED_ANY.search(content)
	if fenced:
		candidates.append(fenced.group(1))
	span = first_object_span(content)
	if span:
		candidates.append(span)

	for candidate in candidates:
		try:
			data = json.loads(candidate)
		except json.JSONDecodeError:
			continue
		if isinstance(data, dict):
			return data

	raise GenerationFormatError('Could not parse a JSON object from generator output', raw_response=content)
