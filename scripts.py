import subprocess
import sys

SOURCES = ["src", "tests"]


def run_tests():
    subprocess.run(["pytest"], check=True)

def run_unit_tests():
    subprocess.run(["pytest", "tests", "-p", "no:doctest"], check=True)

def run_lint():
    subprocess.run(["flake8", *SOURCES], check=True)

def run_typecheck():
    subprocess.run(["mypy", "src/checkignore"], check=True)

def run_format():
    subprocess.run(["black", *SOURCES], check=True)

def run_coverage():
    subprocess.run(["pytest", "--cov=checkignore", "--cov-report=xml"], check=True)

def run_checks():
    run_lint()
    run_typecheck()
    run_tests()

if __name__ == "__main__":
    globals()[sys.argv[1]]()
