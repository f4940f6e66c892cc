"""Streamlit front end for the vocabulary trainer."""
