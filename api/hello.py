"""
Greeting API

GET /hello - Greeting
PUT /hello - Greeting (echoes the method)
"""
import json
from dbbasic_web.responses import json as json_response


def GET(request):
    return json_response(json.dumps({
        'message': 'Hello, world!',
        'method': 'GET',
    }))


def PUT(request):
    return json_response(json.dumps({
        'message': 'Hello, world!',
        'method': 'PUT',
    }))
