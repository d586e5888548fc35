"""Custom exceptions for the finance tracker"""


class FinanceTrackerError(Exception):
    """Base exception for finance tracker errors"""
    pass


class ConfigurationError(FinanceTrackerError):
    """Configuration loading errors"""
    pass


class LLMError(FinanceTrackerError):
    """LLM API errors"""
    pass


class InvalidRequestError(FinanceTrackerError):
    """Advisory request rejected before reaching the model"""
    pass


class CategoryError(FinanceTrackerError):
    """Category registry errors"""
    pass


class DuplicateCategoryError(CategoryError):
    """Category name already present in the registry"""

    def __init__(self, name: str):
        super().__init__(f'"{name}" already exists.')
        self.name = name


class InvalidCategoryError(CategoryError):
    """Category name is empty or protected"""
    pass


class UnknownCategoryError(CategoryError):
    """Transaction references a category missing from the registry"""

    def __init__(self, name: str):
        super().__init__(f'Category "{name}" is not registered.')
        self.name = name


class CategoryInUseError(CategoryError):
    """Category removal blocked because transactions still reference it"""

    def __init__(self, name: str, count: int):
        super().__init__(f'Category "{name}" is used by {count} transaction(s).')
        self.name = name
        self.count = count


class AdvisoryError(FinanceTrackerError):
    """Transient, retryable advisory failures"""
    pass


class SuggestionUnavailable(AdvisoryError):
    """Category suggestion could not be obtained"""
    pass


class RateUnavailable(AdvisoryError):
    """No usable exchange rate could be obtained"""
    pass


class ToolExecutionError(FinanceTrackerError):
    """Host-side tool call failed"""
    pass
