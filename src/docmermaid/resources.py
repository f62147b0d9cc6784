from importlib import resources


def load_bootstrap_template() -> str:
    with resources.files(__package__).joinpath("data/bootstrap.html").open("r", encoding="utf-8") as fh:
        return fh.read()
