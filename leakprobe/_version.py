NAME = "leakprobe"
__version__ = "0.1.0"


def default_user_agent() -> str:
    return f"{NAME}/{__version__}"
