import azure.functions as func

from src.functions.generate_image import GenerateImageHandler, HandlerResponse


bp = func.Blueprint()

# Every verb is routed here so the handler, not the host, answers 405
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def to_http_response(resp: HandlerResponse) -> func.HttpResponse:
    return func.HttpResponse(
        body=resp.body,
        status_code=resp.status_code,
        mimetype=resp.mimetype,
    )


@bp.function_name(name="generate_image")
@bp.route(route="generate-image", methods=ALL_METHODS, auth_level=func.AuthLevel.ANONYMOUS)
def generate_image(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    handler = GenerateImageHandler(invocation_id=context.invocation_id)
    return to_http_response(handler.handle(req.method, req.get_body()))
