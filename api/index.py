"""
Home page

GET / - Server-rendered (or manifest-mode) page for the root route
"""
from ssr_pages.server import handle_page, to_response


def GET(request):
    """Render the home page"""
    return to_response(handle_page('/'))
