"""Textual CSS for the chat screen.

Sidebar on the left, conversation on the right, compose bar across the bottom.
"""

APP_CSS = """
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 1fr 3fr;
    grid-rows: 1fr auto;
}

/* sidebar */
#conversation-list {
    height: 1fr;
    border: tall $primary 40%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    border-subtitle-align: left;

    &:focus-within {
        border: tall $primary;
    }

    & > ListItem.-highlight {
        background: $primary 25%;
    }
}

ConversationItem {
    height: 2;
    padding: 0 1;

    & .contact-name {
        text-style: bold;
        width: 1fr;
    }

    & .contact-preview {
        color: $text-muted;
    }

    &.-unread .contact-name {
        color: $accent;
        text-style: bold underline;
    }
}

/* conversation */
#conversation-panel {
    height: 1fr;
    layout: vertical;
}

#message-list {
    height: 1fr;
    padding: 1 1 0 1;
    border: tall $secondary 40%;
    border-title-color: $secondary;
    border-subtitle-color: $text-muted;

    &:focus {
        border: tall $secondary;
    }
}

#typing-indicator {
    height: 1;
    padding-left: 2;
    color: $accent 70%;
    text-style: italic;
}

.chat-message {
    height: auto;
    max-width: 80%;
    padding: 0 1;
    margin-bottom: 1;
}

.own-message {
    align-horizontal: right;
    margin-left: 20%;
    background: $primary 12%;
    border-right: outer $primary;

    & > .message-header {
        color: $primary;
        text-align: right;
    }
}

.contact-message {
    background: $secondary 12%;
    border-left: outer $secondary;

    & > .message-header {
        color: $secondary;
    }
}

.message-header {
    height: 1;
    text-style: dim;
}

.message-content {
    height: auto;
}

/* log panel, hidden until toggled */
#debug-panel {
    height: 12;
    border: tall $warning 40%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    padding: 0 1;
}

/* compose */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    border-top: hkey $primary 30%;
}

ChatInputBar {
    height: auto;

    & > Input {
        width: 1fr;
    }
}

#send-btn {
    min-width: 10;
    margin-left: 1;
}
"""
