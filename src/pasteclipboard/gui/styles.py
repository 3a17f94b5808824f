"""GTK4 CSS styles for the main window."""

CSS = """
.container {
    padding: 12px;
}
.field-label {
    font-weight: 600;
}
.input-text {
    font-family: monospace;
}
.status-label {
    font-size: 13px;
}
.status-waiting {
    color: #e5a50a;
}
.status-done {
    color: #26a269;
}
.status-error {
    color: #c01c28;
}
"""

STATUS_CLASSES = ("status-waiting", "status-done", "status-error")
