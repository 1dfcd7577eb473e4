import os
import logging
import azure.functions as func

from src.function_blueprints.generate_image_blueprint import bp as generate_image_bp

app = func.FunctionApp()


def _configure_logging() -> None:
    lvl = (os.getenv("AZURE_SDK_LOG_LEVEL") or "").upper()
    if lvl:
        level = getattr(logging, lvl, logging.INFO)
        logging.getLogger("azure").setLevel(level)
        logging.getLogger("urllib3").setLevel(level)
    app_lvl = (os.getenv("MOCKUP_LOG_LEVEL") or "INFO").upper()
    logging.getLogger("mockup").setLevel(getattr(logging, app_lvl, logging.INFO))


_configure_logging()

app.register_functions(generate_image_bp)
