SEND_MESSAGE_DESCRIPTION = """
Send a message to a Discord channel.

- channel: channel ID or name (e.g. "general", "#general" or "123456789")
- message: the text to send (at least 1 character)
- server: optional server ID or name, needed when several servers have a channel with the same name
"""

READ_MESSAGES_DESCRIPTION = """
Read message history from a Discord channel.

Returns a JSON list of messages, oldest first, each with author, content,
timestamp, channel, server and messageId.

- limit: number of messages to retrieve (1-100, default 50)
"""

SEARCH_MESSAGES_DESCRIPTION = """
Search for messages containing specific text in a Discord channel.

The match is case-insensitive and covers the latest `limit` messages
(1-100, default 50). Matching messages are returned as JSON, oldest first.
"""

LIST_CHANNELS_DESCRIPTION = """
List the text channels the bot can see, grouped by server.

Pass `server` (ID or name) to list a single server; otherwise every server
with at least one text channel is included.
"""

LIST_SERVERS_DESCRIPTION = """
List all Discord servers the bot has access to, with member count,
channel count and owner ID.
"""
