from readme_examples.cli.app import app

app()
