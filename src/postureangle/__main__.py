from postureangle.cli import app

app(prog_name="postureangle")
