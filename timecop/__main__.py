from timecop.cli import app

app(prog_name="timecop")
