from revpush.cli.init import app as init_app
from revpush.cli.push import app as push_app

__all__ = ["init_app", "push_app"]
