"""HTML pages for the installation flow."""

from html import escape

ADD_TO_SLACK_BUTTON = (
    '<a href="/auth/install"><img alt="Add to Slack" height="40" width="139" '
    'src="https://platform.slack-edge.com/img/add_to_slack.png" '
    'srcset="https://platform.slack-edge.com/img/add_to_slack.png 1x, '
    'https://platform.slack-edge.com/img/add_to_slack@2x.png 2x" /></a>'
)


def install_page() -> str:
    return ADD_TO_SLACK_BUTTON


def success_page(team_name: str | None) -> str:
    target = escape(team_name) if team_name else "your team"
    return f"<p>Snippet Saver was successfully installed on {target}.</p>"


def failure_page(error: str) -> str:
    return f"<p>Snippet Saver failed to install</p> <pre>{escape(error)}</pre>"
