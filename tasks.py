from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()

TEST_SETTINGS = "committee.test_settings"


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


@task
def update(c):
    """Update all dependencies to their latest versions using poetry."""
    c.run("poetry update")


@task
def up(c):
    """Alias for update - update all dependencies to their latest versions."""
    update(c)


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")


@task
def test(c, path=None):
    """Run Django tests. Optionally specify a specific test path."""
    manage_py = project_relative("manage.py")
    if path:
        c.run(f"python {manage_py} test {path} --settings={TEST_SETTINGS}")
    else:
        c.run(f"python {manage_py} test --settings={TEST_SETTINGS}")


@task
def pytest(c, path=None):
    """Run the test suite with pytest-django."""
    c.run(f"pytest {path or ''}".strip())


@task
def seed(c, output="demo.json", teams=6, groups=0, seed=None):
    """Write a demo tournament document with random results."""
    manage_py = project_relative("manage.py")
    command = f"python {manage_py} seed_demo_tournament --output {output} --teams {teams} --groups {groups}"
    if seed is not None:
        command += f" --seed {seed}"
    c.run(command)


@task
def standings(c, document="demo.json", group=None, qualify=None, json=False):
    """Print the league tables of a tournament document."""
    manage_py = project_relative("manage.py")
    command = f"python {manage_py} compute_standings {document}"
    if group:
        command += f" --group '{group}'"
    if qualify:
        command += f" --qualify {qualify}"
    if json:
        command += " --json"
    c.run(command)
