import functools


def singleton(cls):
    """
    A decorator to enforce the singleton pattern on a class.

    The first call constructs the instance; later calls return it and ignore
    their arguments. `reset_instance()` on the decorated name drops the cached
    instance so the next call constructs a fresh one (used by tests that need
    a different screenshots directory).

    Usage:
        @singleton
        class MyClass:
            pass
    """
    instances = {}

    @functools.wraps(cls, updated=())
    def get_instance(*args, **kwargs):
        if cls not in instances:
            instances[cls] = cls(*args, **kwargs)
        return instances[cls]

    def reset_instance():
        instances.pop(cls, None)

    get_instance.reset_instance = reset_instance
    return get_instance
