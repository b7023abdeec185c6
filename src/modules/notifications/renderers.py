from rest_framework.renderers import BaseRenderer


class EventStreamRenderer(BaseRenderer):
    """Lets content negotiation accept ``text/event-stream`` requests.

    The stream view returns a ``StreamingHttpResponse`` itself, so this
    renderer is only used for error bodies.
    """

    media_type = "text/event-stream"
    format = "sse"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""
        return f"event: error\ndata: {data}\n\n".encode(self.charset)
