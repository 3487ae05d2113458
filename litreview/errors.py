class LiteratureReviewError(Exception):
	pass


class ConfigurationError(LiteratureReviewError):
	pass


class GenerationFormatError(LiteratureReviewError):
	def __init__(self, message: str, raw_response: str | None = None):
		super().__init__(message)
		self.raw_response = raw_response


class ProviderQueryError(LiteratureReviewError):
	def __init__(self, query: str, cause: BaseException | str):
		super().__init__(f"Search provider query failed for '{query}': {cause}")
		self.query = query
		self.cause = cause
