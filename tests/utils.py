import datetime
from pathlib import Path

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def load_key(path, passphrase=None):
    password = passphrase.encode() if passphrase else None
    with open(path, 'rb') as f:
        return serialization.load_pem_private_key(f.read(), password)

def write_key(key, path, passphrase=None):
    if passphrase:
        encryption = serialization.BestAvailableEncryption(passphrase.encode())
    else:
        encryption = serialization.NoEncryption()
    with open(path, 'wb') as f:
        f.write(key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=encryption,
        ))

def subject_to_name(subject):
    """Turn '/C=US/CN=host' into an x509.Name; only C, O and CN are understood."""
    oids = {'C': NameOID.COUNTRY_NAME, 'O': NameOID.ORGANIZATION_NAME, 'CN': NameOID.COMMON_NAME}
    attributes = []
    for part in (subject or '/CN=localhost').strip('/').split('/'):
        key, value = part.split('=', 1)
        attributes.append(x509.NameAttribute(oids[key], value))
    return x509.Name(attributes)

def build_certificate(subject, issuer, public_key, signing_key, days, serial, extensions=()):
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        public_key
    ).serial_number(
        serial
    ).not_valid_before(
        now
    ).not_valid_after(
        now + datetime.timedelta(days=days)
    )
    for extension, critical in extensions:
        builder = builder.add_extension(extension, critical=critical)
    return builder.sign(signing_key, hashes.SHA256())

class FakeOpenSSL:
    """Stands in for the openssl wrapper using the cryptography library."""

    def __init__(self):
        self.calls = []
        self.seed_present = None

    def genrsa(self, out, bits, passphrase, seed=None):
        self.calls.append('genrsa')
        self.seed_present = seed is not None and Path(seed).exists()
        key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
        write_key(key, out, passphrase)

    def unlock_key(self, protected, out, passphrase):
        self.calls.append('unlock_key')
        write_key(load_key(protected, passphrase), out)

    def new_csr(self, key, out, subject=None):
        self.calls.append('new_csr')
        csr = x509.CertificateSigningRequestBuilder().subject_name(
            subject_to_name(subject)
        ).sign(load_key(key), hashes.SHA256())
        with open(out, 'wb') as f:
            f.write(csr.public_bytes(serialization.Encoding.PEM))

    def self_sign_csr(self, csr, key, out, days):
        self.calls.append('self_sign_csr')
        with open(csr, 'rb') as f:
            request = x509.load_pem_x509_csr(f.read())
        cert = build_certificate(
            request.subject, request.subject, request.public_key(), load_key(key),
            days, x509.random_serial_number(),
            [(x509.BasicConstraints(ca=True, path_length=None), True)],
        )
        with open(out, 'wb') as f:
            f.write(cert.public_bytes(serialization.Encoding.PEM))

    def sign_csr(self, csr, ca_crt, ca_key, out, days, extfile=None, serial=1):
        self.calls.append('sign_csr')
        self.serial = serial
        with open(csr, 'rb') as f:
            request = x509.load_pem_x509_csr(f.read())
        with open(ca_crt, 'rb') as f:
            ca = x509.load_pem_x509_certificate(f.read())
        extensions = []
        if extfile is not None:
            value = Path(extfile).read_text().split('=', 1)[1]
            names = [entry.strip()[len('DNS:'):] for entry in value.split(',')]
            extensions.append((x509.SubjectAlternativeName([x509.DNSName(n) for n in names]), False))
        cert = build_certificate(
            request.subject, ca.subject, request.public_key(), load_key(ca_key),
            days, serial, extensions,
        )
        with open(out, 'wb') as f:
            f.write(cert.public_bytes(serialization.Encoding.PEM))

    def print_csr(self, path):
        self.calls.append('print_csr')
        print(f"Certificate Request: {path}")

    def print_certificate(self, path):
        self.calls.append('print_certificate')
        print(f"Certificate: {path}")

