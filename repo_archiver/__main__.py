from repo_archiver.cli import app

app(prog_name="repo-archiver")
