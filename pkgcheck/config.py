APP_NAME = "Package Validation Suite"
APP_VERSION = "1.0.0-dev"

DELTA_EXTENSION = ".delta"
DEFAULT_RESULTS_DIRNAME = "ValidationSuiteResults"

# 1 = run checks one after another on the calling thread
DEFAULT_MAX_WORKERS = 1
