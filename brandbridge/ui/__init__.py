"""Local websocket bridge between the editor UI and the tenant."""
