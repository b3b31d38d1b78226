"""Bootstrap an administrator account: python create_admin.py <email> <name>"""
import getpass
import sys

from app.database import SessionLocal
from app.models.user import User, UserRole
from app.auth.security import hash_password, check_new_password

if len(sys.argv) < 3:
    print("Uso: python create_admin.py <email> <nome>")
    sys.exit(1)

email, name = sys.argv[1].strip().lower(), sys.argv[2].strip()
password = getpass.getpass("Senha: ")
error = check_new_password(password, getpass.getpass("Confirme a senha: "))
if error:
    print(error)
    sys.exit(1)

db = SessionLocal()
if db.query(User).filter(User.email == email).first():
    print(f"Usuário {email} já existe")
    db.close()
    sys.exit(1)

user = User(email=email, name=name, password_hash=hash_password(password), role=UserRole.ADMIN, paused=False)
db.add(user)
db.commit()
print(f'Admin criado: id={user.id}')
db.close()
