"""
blog-api: request pipeline for the blog content API.

The HTTP surface is small on purpose: one REST action for image uploads
(`PUT /post-image`) and one GraphQL endpoint (`/graphql`) for everything
else. See `blog_api.main.create_app` for how the pieces are wired.
"""

__version__ = "0.1.0"
