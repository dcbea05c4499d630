# The database and utils modules import domain errors and entities, so the
# domain package is loaded first whichever submodule is imported.
import tillbook.domain  # noqa: F401


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from tillbook.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
