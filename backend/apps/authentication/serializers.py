from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.serializers import UserSerializer


class EmailOrUsernameTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Extends SimpleJWT to allow logging in with either username or email.
    Accepts any of: username, email, or login (alias).
    """
    email_field = 'email'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields[self.username_field].required = False
        self.fields[self.email_field] = serializers.CharField(required=False)
        self.fields['login'] = serializers.CharField(required=False)

    def validate(self, attrs):
        User = get_user_model()
        login_value = attrs.get('login') or attrs.get(self.email_field) or attrs.get(self.username_field)
        if not login_value:
            raise serializers.ValidationError("Must provide 'username', 'email', or 'login'.")

        if '@' in str(login_value):
            user = User.objects.filter(**{f'{self.email_field}__iexact': login_value}).first()
            # unknown addresses fall through to SimpleJWT's authentication failure
            attrs[self.username_field] = getattr(user, self.username_field) if user else login_value
        else:
            attrs[self.username_field] = login_value

        attrs.pop('login', None)
        attrs.pop(self.email_field, None)

        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data
