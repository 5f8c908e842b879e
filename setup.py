from setuptools import setup

setup(
    name='ftrace-verifier',
    packages=[
        'ftrace_verifier',
        'ftrace_verifier.atrace',
        'ftrace_verifier.batch_verifier',
        'ftrace_verifier.common',
        'ftrace_verifier.ftrace_parser',
        'ftrace_verifier.section_verifier',
        'ftrace_verifier.trace_uri_resolver',
        'ftrace_verifier.trace_verifier',
    ],
    version='0.1.0',
    license='apache-2.0',
    description='Parses ftrace/atrace text captures and checks the order of '
    'userspace trace sections',
    keywords=['ftrace', 'atrace', 'tracing'],
    install_requires=[
        'protobuf',
        'pandas',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
