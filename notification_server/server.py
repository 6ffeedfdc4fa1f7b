# -*- coding: utf-8 -*-
import typing as t

from fastmcp import FastMCP

from notification_server.sink import NotificationSink


def create_notification_server(sink: NotificationSink) -> FastMCP:
    """Builds an MCP tool server that forwards notifications to ``sink``."""
    mcp = FastMCP("NotificationServer")

    @mcp.tool()
    def send_notification(message: str = "Notification sent!") -> dict[str, str]:
        """Sends a notification to the administrator.

        :param message: Text to display.
        :return: Status dictionary.
        """
        sink.notify(message)
        return {"status": "success", "message": "Notification tool executed successfully."}

    @mcp.tool()
    def current_notification() -> t.Optional[str]:
        """Returns the notification currently on display, if any."""
        return sink.current_message

    return mcp


if __name__ == "__main__":
    create_notification_server(NotificationSink()).run()
