# Namespace for pipeline steps
from .validate_companies import ValidateCompanies  # noqa: F401
from .persist_companies import PersistCompanies  # noqa: F401
