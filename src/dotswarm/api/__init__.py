"""
HTTP API for dotswarm (FastAPI)

    from dotswarm.api.main import create_app
"""
