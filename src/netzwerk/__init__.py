"""netzwerk -- declarative HTTP endpoints with typed results and 401 replay.

This package turns a declarative endpoint description into an executed HTTP
request, decodes the response into a typed :class:`~netzwerk.client.Result`,
and queues requests that hit ``401 Unauthorized`` until an auth refresh lets
them replay.

Typical workflow::

    from netzwerk.client import NetzwerkClient
    from netzwerk.request import Endpoint

    endpoint = Endpoint(base_url="https://reqres.in/api", path="/users", method="POST",
                        parameters={"name": "morpheus", "job": "leader"})
    with NetzwerkClient() as client:
        result = client.execute_request(client.build(endpoint))
        if result.is_success:
            print(result.value.body_object)

Modules:
    request: Endpoint descriptors, the request-builder pipeline and decorators.
    client: Transport executor, response classification and the retry queue.
    auth: Auth plugin interface and manager.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration loading and precedence resolution.
    exceptions: Error taxonomy and the normalized public error shape.
    error_codes: Fixed application and transport error codes.
    logger: The logging sink used for request/response logs.
"""

__version__ = "0.1.0"
