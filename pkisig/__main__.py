from pkisig.cli import app

app(prog_name="pkisig")
