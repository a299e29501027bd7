"""
CLI Client Module.

Interactive shell built with Typer and Rich for communicating with a Canvas
server.

Architecture:
- The shell is a thin presentation layer
- All context logic lives in the server
- The shell calls the server via HTTP (httpx)
- The prompt mirrors the server's current context path

Usage:
    canvas-shell --help
    canvas-shell            # Interactive mode
    canvas-shell ping
"""
