"""HTTP API for the company directory."""


def __getattr__(name: str):
    # Importing the app initializes the database; only do it on demand.
    if name == "create_app":
        from company_directory.web.app import create_app

        globals()["create_app"] = create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["create_app"]
