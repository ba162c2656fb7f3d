"""Parsing of client-to-server websocket frames."""