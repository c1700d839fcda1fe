"""
start the sample service

usage: python run.py
"""

from sample_app.main import run

if __name__ == "__main__":
    run()
