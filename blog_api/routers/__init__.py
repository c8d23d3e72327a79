# Routers package.
#
#   auth    /api/auth   register and login
#   blogs   /api/blogs  posts and their comments
#
# Routers only translate HTTP to service calls; errors are raised by the
# services and rendered by the handlers in ``blog_api.exceptions``.
