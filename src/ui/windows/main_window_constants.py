from __future__ import annotations

WINDOW_TITLE = "Sitesmith - Website Builder"

AUTH_ERROR_HINT = (
    "Use \"Set API key\" below, set the OPENROUTER_API_KEY environment variable, or add "
    "your key under api_keys.openrouter in user_settings.json. Then send your message again."
)

SITESMITH_STYLESHEET = """
        QMainWindow, QWidget {
            background-color: #000000;
            color: #e5e7eb;
            font-family: "Inter", "Segoe UI", sans-serif;
        }
        QLabel#project_header {
            color: #ffffff;
            font-size: 16px;
            font-weight: bold;
            padding: 6px 0;
        }
        QLabel#error_banner {
            background-color: #3f1d1d;
            border: 1px solid #f87171;
            color: #fecaca;
            padding: 8px;
            border-radius: 5px;
        }
        QLabel#thinking_indicator { color: #a78bfa; }
        QLabel#preview_placeholder { background-color: #ffffff; color: #9ca3af; }
        QTextBrowser#chat_display {
            background-color: #000000;
            border-top: 1px solid #27272a;
            color: #e5e7eb;
            font-size: 14px;
        }
        QTextEdit#chat_input {
            background-color: #18181b;
            border: 1px solid #3f3f46;
            color: #e5e7eb;
            font-size: 14px;
            padding: 8px;
            border-radius: 5px;
            max-height: 90px;
        }
        QListWidget#project_list {
            background-color: #09090b;
            border: 1px solid #27272a;
        }
        QListWidget#project_list::item:selected { background-color: #4c1d95; }
        QPushButton {
            background-color: #18181b;
            border: 1px solid #3f3f46;
            color: #e5e7eb;
            padding: 6px 10px;
            border-radius: 5px;
        }
        QPushButton:hover { background-color: #27272a; }
        QPushButton#send_button { border: 1px solid #7c3aed; font-weight: bold; }
    """
