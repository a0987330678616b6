import sys
from unittest import mock

import pytest

from certmaker.common.errors import ToolkitError
from certmaker.main import main, parse_arguments

# the package re-exports main(), which shadows the certmaker.main submodule attribute
cli_main = sys.modules['certmaker.main']


@pytest.mark.parametrize('argv', [
    [],
    ['-S'],
    ['-c', 'a.csr', '-C', 'a.crt'],
    ['-c', 'a.csr', '-n', 'example.org'],
    ['-C', 'a.crt', '-S'],
    ['-n', 'example.org', '-l', '0'],
    ['-n', 'example.org', '-D', 'soon'],
    ['-n', 'example.org', '--bogus'],
])
def test_usage_errors_exit_with_one(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(argv)
    assert excinfo.value.code == 1
    assert 'usage:' in capsys.readouterr().err


def test_missing_fqdn_message(capsys):
    with pytest.raises(SystemExit):
        parse_arguments(['-o', 'out'])
    assert '-n/--fqdn' in capsys.readouterr().err


def test_defaults_filled_in():
    args = parse_arguments(['-n', 'example.org'])
    assert args.key_length == 2048
    assert args.days == 365


def test_existing_key_exits_one_without_force(tmp_path):
    out = tmp_path / 'out'
    out.mkdir()
    key = out / 'example.org.key'
    key.write_text('old key')

    assert main(['-n', 'example.org', '-o', str(out), '-p', 'pw']) == 1
    assert key.read_text() == 'old key'
    assert not (out / 'example.org-pass.key').exists()


def test_missing_check_file_exits_one(tmp_path):
    assert main(['-c', str(tmp_path / 'missing.csr')]) == 1


def test_missing_toolkit_exits_127(tmp_path):
    csr = tmp_path / 'a.csr'
    csr.write_text('anything')
    assert main(['-c', str(csr), '--openssl', str(tmp_path / 'no-openssl')]) == 127


@mock.patch.object(cli_main, 'run', side_effect=ToolkitError(3, ['openssl', 'req']))
def test_toolkit_exit_code_is_propagated(mock_run):
    assert main(['-n', 'example.org']) == 3


@mock.patch.object(cli_main, 'run', side_effect=KeyboardInterrupt)
def test_interrupt_exits_130(mock_run):
    assert main(['-n', 'example.org']) == 130


@mock.patch.object(cli_main, 'CertificateGenerator')
def test_create_mode_runs_generator(mock_generator):
    assert main(['-n', 'example.org', '-o', 'out']) == 0
    options = mock_generator.call_args[0][0]
    assert options.fqdn == 'example.org'
    mock_generator.return_value.generate.assert_called_once_with()


@mock.patch.object(cli_main, 'inspect_file')
def test_check_mode_runs_inspector(mock_inspect):
    assert main(['-C', 'a.crt']) == 0
    mock_inspect.assert_called_once()


def test_output_dir_that_is_a_file_exits_one(tmp_path):
    not_a_dir = tmp_path / 'taken'
    not_a_dir.write_text('regular file')

    assert main(['-n', 'example.org', '-o', str(not_a_dir), '-p', 'pw12345']) == 1
    assert not_a_dir.read_text() == 'regular file'


@mock.patch.object(cli_main, 'run', side_effect=ValueError("could not parse certificate"))
def test_unexpected_error_exits_one(mock_run):
    assert main(['-n', 'example.org']) == 1
